"""Console client for the finance tracker."""
