"""Core building blocks: transport, upload subsystem, storage lookup."""
