"""Mountain Goats: rules engine for the dice-and-summits board game."""
