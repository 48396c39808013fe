"""Baby-care logging backend with points and a leaderboard."""
