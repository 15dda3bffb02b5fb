"""Cancellation token and error implementations (see ``base.cancellation``)."""
