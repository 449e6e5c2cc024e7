"""Terminal UI: key input, theme, presenters and the app loop."""
