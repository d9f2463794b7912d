"""
Report Aggregation Layer

Pure functions that turn rows fetched by the app selectors into the
numbers shown on the reporting pages. Nothing in this package queries
the database.

Module Organization:
- base: Percentages, grouping and DTO serialization helpers
- attendance_report: Per-participant attendance rates over a period
- analytics_report: Program analytics, drill-downs, dashboard, comparison
- finance_report: Fee stage completion by batch
- ecommerce_report: Store setup counts by status and platform
- custom_report: Ad hoc report builder over one data source
- facilitator: Coach summary of assigned participants
"""
