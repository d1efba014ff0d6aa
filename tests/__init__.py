"""Tests for the AgentMart API."""
