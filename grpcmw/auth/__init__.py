"""Server-side authentication interceptors and authorization metadata helpers."""