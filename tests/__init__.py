"""Tests for wp-mirror-tool."""
