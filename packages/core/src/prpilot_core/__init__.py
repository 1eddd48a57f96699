"""Pull-request preparation: branch analysis, title inference, reviewer ranking and PR lifecycle."""
