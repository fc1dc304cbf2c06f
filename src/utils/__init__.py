"""Shared helpers for the packager front ends."""
