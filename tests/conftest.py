"""
Shared fixtures for BSA Discovery Questionnaire tests
"""

import itertools
import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bsa_discovery.notices import NoticeBoard
from bsa_discovery.project import ProjectConfiguration, ProjectType, Timeline
from bsa_discovery.questionnaire.models import Question, Questionnaire, QuestionType, Section
from bsa_discovery.scheduling import ManualScheduler




@pytest.fixture
def scheduler():
    """Virtual-time scheduler; timers only fire when the test advances it."""
    return ManualScheduler()


@pytest.fixture
def notices():
    return NoticeBoard()


@pytest.fixture
def id_factory():
    """Deterministic upload ids: up-1, up-2, ..."""
    counter = itertools.count(1)
    return lambda: f"up-{next(counter)}"


@pytest.fixture
def acme_project():
    return ProjectConfiguration(
        name="Acme Portal",
        client="Acme Corp",
        type=ProjectType.INTEGRATION,
        timeline=Timeline.THREE_TO_SIX_MONTHS,
        context="Replacing the partner portal",
        selected_areas=["data-management"],
    )


@pytest.fixture
def small_questionnaire():
    """Two sections mixing plain strings and Question objects."""
    return Questionnaire(
        title="Discovery Questionnaire - Acme Portal",
        sections=[
            Section(
                title="Business Overview",
                description="Goals and drivers",
                questions=[
                    "What are the primary business objectives for this project?",
                    Question(id="bo-2", text="Who sponsors the project?", type=QuestionType.TEXT),
                ],
            ),
            Section(
                title="Data Management",
                questions=["Where does customer data live today?"],
            ),
        ],
    )


