"""
Deployment and Management Scripts
================================

Operator entry points for the LetsPayHBAR contracts.

Structure:
- deploy_letspay: fresh implementation + proxy deployment via Hardhat Ignition
- upgrade_to_v2: upgrade the proxy to the V2 implementation
- fund_proxy: send HBAR to the proxy through fundContract()
"""

__version__ = "1.0.0"
__author__ = "LetsPay Team"
