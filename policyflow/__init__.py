"""policyflow - policy document version lifecycle manager.

Version store, review state machine, simulated preprocessing / indexing
pipelines and change notifications for internal policy documents.
"""

__version__ = "0.1.0"
