"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from gridwise.session.models import AIContext
from gridwise.workbook import InMemoryWorkbook


@pytest.fixture
def workbook() -> InMemoryWorkbook:
    """Small sales sheet: header row plus four data rows in A1:C5."""
    return InMemoryWorkbook(
        {
            "A1": "Region",
            "B1": "Sales",
            "C1": "Owner",
            "A2": "North",
            "B2": 120,
            "C2": "old",
            "A3": "South",
            "B3": 80,
            "C3": "Bold old",
            "A4": "East",
            "B4": 200,
            "C4": "new",
            "A5": "West",
            "B5": 80,
            "C5": "OLD",
        }
    )


@pytest.fixture
def selection_context() -> AIContext:
    """Context with the range A1:B10 selected."""
    return AIContext(
        current_workbook="book",
        current_worksheet="Sheet1",
        current_selection="A1:B10",
    )
