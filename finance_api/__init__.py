"""Flask JSON API for the finance tracker."""
