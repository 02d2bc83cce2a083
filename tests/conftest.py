import logging

import pytest

from fakes import FakePage


@pytest.fixture(autouse=True)
def reset_trends_logger():
    # setup_logging binds a handler to whatever stderr the test had
    yield
    logger = logging.getLogger("trends")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def games_page():
    body = "\n".join([
        "NHL Betting Trends",
        "Monday, October 19",
        "7:00 PM ET",
        "Utah",
        "VS",
        "New York",
        "OVER the total, team is 8-2 in last 10",
        "Rangers are 6-4 ATS in their last 10 home games",
        "9:00 PM ET",
        "Boston @ Toronto",
        "Bruins are UNDER 7-3 in their last 5 games",
        "10:30 PM",
        "Vegas VS Edmonton",
        "Copyright 2025 - all trends OVER 1-1 are for entertainment",
    ])
    return FakePage(body=body)
