from psycopg.rows import dict_row

from pdfindex.database.connection import get_connection
from pdfindex.processor.models import Asset


class AssetRepository:
    """Read-only lookups against the host application's assets table."""

    def get_asset_for_processing(self, asset_id: str) -> Asset | None:
        """Find an asset by ID, including soft-deleted ones."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, owner_id, original_path, original_file_name, deleted_at
                    FROM assets
                    WHERE id = %s
                    """,
                    (asset_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return Asset(
            id=str(row["id"]),
            owner_id=str(row["owner_id"]),
            original_path=row["original_path"],
            original_file_name=row["original_file_name"],
            deleted_at=row["deleted_at"],
        )

    def get_pdf_asset_ids(self, force: bool = False) -> list[str]:
        """List live PDF asset IDs.

        Without *force*, only assets that have never been picked up
        (no pdf_documents row) are returned.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT a.id
                    FROM assets a
                    LEFT JOIN pdf_documents d ON d.asset_id = a.id
                    WHERE a.deleted_at IS NULL
                      AND lower(a.original_file_name) LIKE '%%.pdf'
                      AND (%s OR d.asset_id IS NULL)
                    ORDER BY a.created_at
                    """,
                    (force,),
                )
                rows = cur.fetchall()
        return [str(row[0]) for row in rows]
