"""ShelterHub — group-scoped custody, activity feed and reporting backend for animal shelters."""
