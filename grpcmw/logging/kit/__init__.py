"""Key/value structured loggers, logging interceptors, options and context helpers."""