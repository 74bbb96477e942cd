"""Core relay logic: build timer, project root inference, build environment,
payload serialization and the message emitter."""
