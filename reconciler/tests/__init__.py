"""Tests for the reconciler package."""
