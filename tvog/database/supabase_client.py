from supabase import create_client, Client, ClientOptions
from tvog.config.settings import settings


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Use for admin operations and background jobs."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def has_service_client(cls) -> bool:
        return bool(settings.supabase_service_role_key)

    @classmethod
    def new_client(cls) -> Client:
        """Fresh anon client. Sign-in flows keep session state on the client, so they must not share one."""
        return create_client(settings.supabase_url, settings.supabase_key)

    @classmethod
    def for_user(cls, access_token: str) -> Client:
        """Anon client whose PostgREST and Storage requests carry the user's JWT, so RLS applies."""
        options = ClientOptions(headers={"Authorization": f"Bearer {access_token}"})
        return create_client(settings.supabase_url, settings.supabase_key, options=options)

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()
