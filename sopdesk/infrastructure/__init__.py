"""Infrastructure: Firestore record store, token verification, external collaborators."""
