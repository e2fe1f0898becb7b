"""Tests for payment adapters."""
