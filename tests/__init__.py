"""Test suite for recordconfig."""
