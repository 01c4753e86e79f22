"""Page stack and session handlers for the interactive tracker."""
