"""Domain tools for the symptom tracker: data model, scoring, survey forms and history."""
