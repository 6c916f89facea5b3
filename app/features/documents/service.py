"""
Document hierarchy store.

Each organization owns a forest of documents. Slugs are unique per
organization (enforced by the ``org_slug_unique`` constraint), siblings are
ordered by ``order``, and deleting a document removes its whole subtree in
one transaction.
"""
from collections import defaultdict
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.base import utcnow
from app.core.database.transactions import commit_or_raise, unit_of_work
from app.core.errors import ConflictError, NotFound, ValidationError
from app.core.slugs import make_slug
from app.features.documents.models import Document
from app.features.documents.schemas import DocumentCreate, DocumentTree, DocumentUpdate
from app.features.permissions.dependencies import AuthorizationGuard
from app.features.permissions.models import Permission
from app.utils import get_logger


log = get_logger(__name__)

# Root listing materializes children and grandchildren
TREE_DEPTH = 2

NOT_NULLABLE = frozenset({"title", "slug", "published", "order"})


def _sibling_order():
    return (Document.order.asc(), Document.created_at.asc(), Document.id.asc())


def _parent_is(parent_id: str | None):
    return Document.parent_id.is_(None) if parent_id is None else Document.parent_id == parent_id


def _node(document: Document, children: list[DocumentTree] | None = None) -> DocumentTree:
    node = DocumentTree.model_validate(document)
    node.children = children or []
    return node


class DocumentStore:

    def __init__(self, db: AsyncSession, guard: AuthorizationGuard):
        self.db = db
        self.guard = guard

    async def _load(self, document_id: str) -> Document:
        document = await self.db.get(Document, document_id)
        if document is None:
            raise NotFound("Document not found")
        return document

    async def _exists(self, document_id: str) -> bool:
        result = await self.db.execute(select(Document.id).where(Document.id == document_id))
        return result.scalar_one_or_none() is not None

    async def _load_parent(self, organization_id: str, parent_id: str) -> Document:
        # A parent in another organization is reported exactly like a missing one
        parent = await self.db.get(Document, parent_id)
        if parent is None or parent.organization_id != organization_id:
            raise NotFound("Parent document not found")
        return parent

    async def _children_of(self, parent_ids: list[str]) -> dict[str, list[Document]]:
        grouped: dict[str, list[Document]] = defaultdict(list)
        if not parent_ids:
            return grouped
        result = await self.db.execute(
            select(Document).where(Document.parent_id.in_(parent_ids)).order_by(*_sibling_order())
        )
        for document in result.scalars().all():
            grouped[document.parent_id].append(document)
        return grouped

    async def _next_order(self, organization_id: str, parent_id: str | None) -> int:
        """One past the highest sibling order, 0 for the first child."""
        result = await self.db.execute(
            select(func.max(Document.order)).where(
                Document.organization_id == organization_id,
                _parent_is(parent_id),
            )
        )
        current = result.scalar_one_or_none()
        return 0 if current is None else current + 1

    async def _subtree_ids(self, root_id: str) -> list[str]:
        ids = [root_id]
        frontier = [root_id]
        seen = {root_id}
        while frontier:
            result = await self.db.execute(
                select(Document.id).where(Document.parent_id.in_(frontier))
            )
            frontier = [doc_id for doc_id in result.scalars().all() if doc_id not in seen]
            seen.update(frontier)
            ids.extend(frontier)
        return ids

    async def _is_descendant(self, candidate_id: str, ancestor_id: str) -> bool:
        """True when ``candidate_id`` is ``ancestor_id`` or lies below it."""
        seen: set[str] = set()
        current: str | None = candidate_id
        while current is not None and current not in seen:
            if current == ancestor_id:
                return True
            seen.add(current)
            result = await self.db.execute(select(Document.parent_id).where(Document.id == current))
            current = result.scalar_one_or_none()
        return False

    async def list_tree(self, user_id: str | None, organization_id: str) -> list[DocumentTree]:
        """
        Root documents of the organization with children and grandchildren.

        Deeper descendants are not loaded; fetch them from a deeper root.
        """
        await self.guard.authorize(user_id, organization_id, Permission.VIEW_DOCS)

        result = await self.db.execute(
            select(Document)
            .where(Document.organization_id == organization_id, Document.parent_id.is_(None))
            .order_by(*_sibling_order())
        )
        levels = [list(result.scalars().all())]
        children_by_level = []
        for _ in range(TREE_DEPTH):
            grouped = await self._children_of([doc.id for doc in levels[-1]])
            children_by_level.append(grouped)
            levels.append([doc for docs in grouped.values() for doc in docs])

        def build(document: Document, depth: int) -> DocumentTree:
            if depth >= TREE_DEPTH:
                return _node(document)
            children = children_by_level[depth].get(document.id, [])
            return _node(document, [build(child, depth + 1) for child in children])

        return [build(root, 0) for root in levels[0]]

    async def get(self, user_id: str | None, document_id: str) -> DocumentTree:
        """Document with its immediate children."""
        self.guard.require_user(user_id)
        document = await self._load(document_id)
        await self.guard.authorize(user_id, document.organization_id, Permission.VIEW_DOCS)

        grouped = await self._children_of([document.id])
        return _node(document, [_node(child) for child in grouped.get(document.id, [])])

    async def create(self, user_id: str | None, organization_id: str, data: DocumentCreate) -> Document:
        """
        Create a document, appended after its future siblings.

        Raises:
            ValidationError: blank title or unusable slug
            NotFound: parent missing or in another organization
            ConflictError: slug already used in the organization
        """
        await self.guard.authorize(user_id, organization_id, Permission.EDIT_DOCS)

        title = data.title.strip()
        if not title:
            raise ValidationError("Document title is required")
        slug = make_slug(data.slug if data.slug is not None else title)

        if data.parent_id is not None:
            await self._load_parent(organization_id, data.parent_id)

        # Read-max-then-insert: concurrent siblings may share an order value
        order = await self._next_order(organization_id, data.parent_id)
        document = Document(
            organization_id=organization_id,
            title=title,
            slug=slug,
            content=data.content,
            parent_id=data.parent_id,
            order=order,
            created_by=user_id,
            last_edited_by=user_id,
        )
        self.db.add(document)
        try:
            await commit_or_raise(self.db, f"A document with slug '{slug}' already exists in this organization")
        except ConflictError:
            # The parent may have been deleted after it was checked
            if data.parent_id is not None and not await self._exists(data.parent_id):
                raise NotFound("Parent document not found") from None
            raise
        await self.db.refresh(document)

        log.info(f"Document {document.id} ({slug}) created in org {organization_id} by {user_id}")
        return document

    async def update(self, user_id: str | None, document_id: str, data: DocumentUpdate) -> Document:
        """
        Apply the fields present in ``data``.

        A slug change is checked against the other documents of the
        organization; keeping the current slug is a no-op. Moving under a new
        parent appends the document to its new siblings unless ``order`` is given.
        """
        self.guard.require_user(user_id)
        document = await self._load(document_id)
        await self.guard.authorize(user_id, document.organization_id, Permission.EDIT_DOCS)

        changes = data.model_dump(exclude_unset=True)
        for field in NOT_NULLABLE & changes.keys():
            if changes[field] is None:
                raise ValidationError(f"'{field}' cannot be null")

        if "title" in changes:
            changes["title"] = changes["title"].strip()
            if not changes["title"]:
                raise ValidationError("Document title is required")
        if "slug" in changes:
            changes["slug"] = make_slug(changes["slug"])

        if "parent_id" in changes and changes["parent_id"] != document.parent_id:
            new_parent_id = changes["parent_id"]
            if new_parent_id is not None:
                await self._load_parent(document.organization_id, new_parent_id)
                if await self._is_descendant(new_parent_id, document.id):
                    raise ValidationError("A document cannot be moved under itself or its descendants")
            if "order" not in changes:
                changes["order"] = await self._next_order(document.organization_id, new_parent_id)
            log.info(f"Document {document_id} moved under {new_parent_id or 'root'}")

        for field, value in changes.items():
            setattr(document, field, value)
        document.last_edited_by = user_id
        document.updated_at = utcnow()

        await commit_or_raise(self.db, f"A document with slug '{document.slug}' already exists in this organization")
        await self.db.refresh(document)
        return document

    async def delete(self, user_id: str | None, document_id: str) -> list[str]:
        """
        Delete the document and every descendant, all or nothing.

        Returns:
            Ids of the removed documents, the target first
        """
        self.guard.require_user(user_id)
        document = await self._load(document_id)
        await self.guard.authorize(user_id, document.organization_id, Permission.EDIT_DOCS)

        async with unit_of_work(self.db, "Document could not be deleted"):
            ids = await self._subtree_ids(document.id)
            await self.db.execute(
                delete(Document)
                .where(Document.id.in_(ids))
                .execution_options(synchronize_session=False)
            )

        log.info(f"Document {document_id} deleted with {len(ids) - 1} descendants by {user_id}")
        return ids
