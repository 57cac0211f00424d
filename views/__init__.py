"""View controllers for the wardrobe screens."""
