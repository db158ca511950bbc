"""Core building blocks: config resolution, multipart encoding and transports."""
