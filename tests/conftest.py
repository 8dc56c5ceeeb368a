# tests/conftest.py
from datetime import datetime, timezone

import pytest

from schoolfeed.models import DateRange


@pytest.fixture
def generated_at():
    return datetime(2024, 3, 5, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def march():
    return DateRange(
        start=datetime(2024, 3, 1, tzinfo=timezone.utc),
        end=datetime(2024, 3, 31, tzinfo=timezone.utc),
    )


@pytest.fixture
def marks_payload():
    """Two subject groups using the two casings the API has been seen to return."""
    return {
        "Subjects": [
            {
                "Subject": {"Abbrev": "M", "Name": "Matematika"},
                "Marks": [
                    {"MarkText": "1", "EditDate": "2024-03-04T08:00:00+01:00", "Caption": "Písemka"},
                    {"Value": 2, "MarkDate": "2024-03-02T09:00:00Z", "Theme": "Zlomky"},
                    {"Caption": "bez data"},
                ],
            },
            {
                "Name": "Čeština",
                "marks": [
                    {"Text": "3-", "Date": "??", "Created": "2024-03-03"},
                    {"MarkText": "   ", "EditDate": "2024-03-03"},
                ],
            },
        ]
    }


@pytest.fixture
def homework_payload():
    return {
        "Homeworks": [
            {"Subject": {"Abbrev": "AJ"}, "DueDate": "2024-03-10", "Content": "Unit 5 exercises"},
            {"Subject": {"Name": "Fyzika"}, "Deadline": "2024-03-06T07:45:00Z", "HomeworkText": "Laboratorní  protokol"},
            {"Abbrev": "D", "DateStart": "2024-04-02", "Title": "Referát"},
            {"Subject": {"Abbrev": "M"}, "Text": "no date at all"},
        ]
    }


@pytest.fixture
def events_payload():
    return {
        "events": [
            {"Title": "Výlet", "DateFrom": "2024-03-20T08:00:00Z", "DateTo": "2024-03-21T16:00:00Z",
             "Type": {"Name": "Akce třídy"}},
            {"Name": "Třídní schůzky", "Start": "2024-03-07T17:00:00Z", "EventType": "schůzka"},
            {"Description": "Konec pololetí", "End": "2024-03-15"},
            {"Date": "2024-05-01", "Title": "Mimo rozsah"},
        ]
    }


class Recorder:
    """Stands in for both external collaborators during pipeline tests."""

    def __init__(self, payload=None, fetch_error=None, submit_error=None):
        self.payload = payload
        self.fetch_error = fetch_error
        self.submit_error = submit_error
        self.fetch_calls = []
        self.submitted = []

    def fetch(self, kind, date_range):
        self.fetch_calls.append((kind, date_range))
        if self.fetch_error:
            raise self.fetch_error
        return self.payload

    def submit(self, encoded):
        if self.submit_error:
            raise self.submit_error
        self.submitted.append(encoded)
        return {"ok": True}


@pytest.fixture
def recorder_factory():
    return Recorder
