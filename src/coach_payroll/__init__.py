'''
Coach payroll backend: prorated monthly payouts to coaches for
fixed-price student packages, including mid-cycle coach transfers.

The proration engine lives in `coach_payroll.core`; `coach_payroll.main`
exposes it over HTTP.
'''
__version__ = "0.1.0"
