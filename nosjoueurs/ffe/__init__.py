"""Readers for the French Chess Federation (FFE) results pages."""
