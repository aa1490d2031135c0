"""Shared configuration, logging, enums and Firestore data access."""
