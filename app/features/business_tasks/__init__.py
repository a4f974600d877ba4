"""
Business task dashboard feature package.

The rule-based task engine (scoring, generators, aggregation driver), the
weekly snapshot, completion tracking and the HTTP router all live here so the
whole slice can be read top to bottom. The router is imported from
`app.features.business_tasks.api.router` by the application.
"""
