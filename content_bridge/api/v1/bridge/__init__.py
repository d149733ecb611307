"""Site info, homepage update, bulk export and bulk import."""
