"""Transport-side building blocks: wire requests, interceptors, builders, sessions."""
