"""
Pytest configuration shared by the whole test suite.
"""

import os
import sys

import pytest

from nal_syntax.settings import make_settings
from nal_syntax.parser import ParserSession
from nal_syntax.tables import Codecs

# Allow test modules in subdirectories to import the unit builders
sys.path.insert(0, os.path.dirname(__file__))


@pytest.fixture
def hevc_session():
    return ParserSession(make_settings(codec=Codecs.hevc))


@pytest.fixture
def mpeg2_session():
    return ParserSession(make_settings(codec=Codecs.mpeg2))
