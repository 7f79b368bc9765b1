"""sopdesk: multi-tenant backend for SOPs, employees and training videos."""
