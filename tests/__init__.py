"""Test suite for the OneBot relay.

Unit tests live under unit/, grouped by domain (transport, admission,
conversation, storage, bot, ...). Modules carry no ``test_`` prefix and are
collected by conftest.py.
"""
