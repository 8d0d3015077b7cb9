"""Collaborators the citation count engine talks to: records, preferences,
progress reporting and localization."""
