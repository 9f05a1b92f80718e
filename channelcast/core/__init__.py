"""Core routing: the broadcast router, its codec and its factory."""
