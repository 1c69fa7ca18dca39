"""Evaluation harness for Dairy-Free Donny agents."""
