"""Baseline dodger agent."""
