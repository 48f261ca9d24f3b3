from cesu_console.clients.cesu_api.http_client import APIError, HttpClient
from cesu_console.clients.cesu_api.records_client import RecordPage, RecordsClient, unwrap_rows

__all__ = ["APIError", "HttpClient", "RecordPage", "RecordsClient", "unwrap_rows"]
