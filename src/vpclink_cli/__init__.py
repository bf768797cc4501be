"""vpclink-cli: converge control-plane VPC links to their declared state."""

__version__ = "0.1.0"
