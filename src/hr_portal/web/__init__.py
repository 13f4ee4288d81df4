"""Flask controllers; each module exposes `register(app, container)`."""
