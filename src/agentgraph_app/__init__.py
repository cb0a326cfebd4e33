"""Qt desktop front end for the agent execution graph."""
