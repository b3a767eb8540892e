"""
Billing package - metered entitlements for accounts.

Decides whether an account may use the metered service (free allowance,
paid subscription, exhausted quota, cancelled subscription) and reconciles
completed Stripe checkouts into local account state.
"""
