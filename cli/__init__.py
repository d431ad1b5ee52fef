"""Command line front end for gradlearn."""
