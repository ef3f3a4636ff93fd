"""Shared plumbing for Paradise PDF tools."""
