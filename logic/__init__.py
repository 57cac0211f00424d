"""Pure helpers shared by the views."""
