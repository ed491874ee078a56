"""Candidate authentication and assessment backend."""
