"""Fulcrum - Recruitment review pipeline.

This package moves job applications through ordered pipeline stages
(resume review, phone screen, technical interview), assigns reviewers to
each stage fairly, and gates stage advancement on completed reviews.
"""

__version__ = "0.1.0"
