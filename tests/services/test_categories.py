import pytest

from errors import CategoryHasChildrenError, CategoryNotFoundError, InvalidMoveError
from services.categories import generate_slug


class TestGenerateSlug:
    """Tests for slug generation."""

    def test_latin_title(self):
        """Test latin title."""
        assert generate_slug("CNC Machining") == "cnc-machining"

    def test_special_characters_removed(self):
        """Test special characters removed."""
        assert generate_slug("Laser & Plasma Cutting!") == "laser-plasma-cutting"

    def test_persian_letters_kept(self):
        """Test persian letters kept."""
        assert generate_slug("تراشکاری  صنعتی") == "تراشکاری-صنعتی"

    def test_hyphens_collapsed_and_trimmed(self):
        """Test hyphens collapsed and trimmed."""
        assert generate_slug("  --sheet---metal-- ") == "sheet-metal"


class TestCategoryService:
    """Tests for CategoryService."""

    def test_create_category_simple(self, services):
        """Test creating a root category."""
        category = services.categories.create("Casting", description="Metal casting")

        assert category.id
        assert category.title == "Casting"
        assert category.slug == "casting"
        assert category.description == "Metal casting"
        assert category.parent_id is None
        assert category.level == 1
        assert category.is_active is True

    def test_create_category_with_parent(self, services):
        """Test that a child gets the parent's level plus one."""
        parent = services.categories.create("Machining")
        child = services.categories.create("Turning", parent_id=parent.id)

        assert child.parent_id == parent.id
        assert child.level == 2

    def test_create_with_missing_parent_raises(self, services):
        """Test create with missing parent raises."""
        with pytest.raises(CategoryNotFoundError, match="Category with ID nope not found"):
            services.categories.create("Orphan", parent_id="nope")

    def test_create_duplicate_slug_gets_suffix(self, services):
        """Test that duplicate slugs get a numeric suffix."""
        first = services.categories.create("Welding")
        second = services.categories.create("Welding")
        third = services.categories.create("Other", slug="welding")

        assert first.slug == "welding"
        assert second.slug == "welding-1"
        assert third.slug == "welding-2"

    def test_create_appends_to_sibling_group(self, services):
        """Test create appends to sibling group."""
        parent = services.categories.create("Machining")
        a = services.categories.create("Turning", parent_id=parent.id)
        b = services.categories.create("Milling", parent_id=parent.id)
        root = services.categories.create("Casting")

        assert a.order == 0
        assert b.order == 1
        assert root.order == 1

    def test_find_category_by_id(self, services):
        """Test find category by id."""
        created = services.categories.create("Forging")

        found = services.categories.find(created.id)

        assert found is not None
        assert found.title == "Forging"

    def test_find_category_by_id_not_found(self, services):
        """Test find category by id not found."""
        assert services.categories.find("missing") is None

    def test_find_by_slug_only_active(self, services):
        """Test find by slug only active."""
        category = services.categories.create("Molding")
        assert services.categories.find_by_slug("molding").id == category.id

        services.categories.update(category.id, is_active=False)

        assert services.categories.find_by_slug("molding") is None

    def test_find_children_in_order(self, services):
        """Test find children in order."""
        parent = services.categories.create("Machining")
        a = services.categories.create("Turning", parent_id=parent.id)
        b = services.categories.create("Milling", parent_id=parent.id)

        children = services.categories.find_children(parent.id)

        assert [c.id for c in children] == [a.id, b.id]

    def test_find_all_empty(self, services):
        """Test find all empty."""
        assert services.categories.find_all() == []

    def test_update_title_regenerates_slug(self, services):
        """Test update title regenerates slug."""
        category = services.categories.create("Old Name")

        updated = services.categories.update(category.id, title="New Name")

        assert updated.title == "New Name"
        assert updated.slug == "new-name"

    def test_update_explicit_slug(self, services):
        """Test update explicit slug."""
        category = services.categories.create("Name")

        updated = services.categories.update(category.id, slug="Custom Slug")

        assert updated.slug == "custom-slug"

    def test_update_same_slug_keeps_it(self, services):
        """Test update same slug keeps it."""
        category = services.categories.create("Name")

        updated = services.categories.update(category.id, slug="name")

        assert updated.slug == "name"

    def test_update_parent_to_root(self, services):
        """Test update parent to root."""
        parent = services.categories.create("Parent")
        child = services.categories.create("Child", parent_id=parent.id)

        updated = services.categories.update(child.id, parent_id=None)

        assert updated.parent_id is None
        assert updated.level == 1

    def test_update_parent_to_self_raises(self, services):
        """Test update parent to self raises."""
        category = services.categories.create("Self")

        with pytest.raises(InvalidMoveError):
            services.categories.update(category.id, parent_id=category.id)

    def test_update_nonexistent_category_raises_error(self, services):
        """Test update nonexistent category raises error."""
        with pytest.raises(CategoryNotFoundError, match="Category with ID 9999 not found"):
            services.categories.update("9999", title="Name")

    def test_delete_category(self, services):
        """Test delete category."""
        category = services.categories.create("ToDelete")

        services.categories.delete(category.id)

        assert services.categories.find(category.id) is None

    def test_delete_nonexistent_category_raises(self, services):
        """Test delete nonexistent category raises."""
        with pytest.raises(CategoryNotFoundError):
            services.categories.delete("missing")

    def test_delete_with_children_raises(self, services):
        """Test delete with children raises."""
        parent = services.categories.create("Parent")
        services.categories.create("Child", parent_id=parent.id)

        with pytest.raises(CategoryHasChildrenError):
            services.categories.delete(parent.id)

        assert services.categories.find(parent.id) is not None


class TestCategoryTree:
    """Tests for the tree-shaped repository operations."""

    def test_get_tree_nests_children(self, services):
        """Test get tree nests children."""
        machining = services.categories.create("Machining")
        turning = services.categories.create("Turning", parent_id=machining.id)
        cnc = services.categories.create("CNC Turning", parent_id=turning.id)
        casting = services.categories.create("Casting")

        tree = services.categories.get_tree()

        assert [c.id for c in tree] == [machining.id, casting.id]
        assert [c.id for c in tree[0].children] == [turning.id]
        assert [c.id for c in tree[0].children[0].children] == [cnc.id]
        assert tree[1].children == []

    def test_get_tree_active_only_promotes_orphans(self, services):
        """Test get tree active only promotes orphans."""
        parent = services.categories.create("Hidden")
        child = services.categories.create("Visible", parent_id=parent.id)
        services.categories.update(parent.id, is_active=False)

        tree = services.categories.get_tree(active_only=True)

        assert [c.id for c in tree] == [child.id]

    def test_reorder_sets_sibling_order(self, services):
        """Test reorder sets sibling order."""
        a = services.categories.create("A")
        b = services.categories.create("B")
        c = services.categories.create("C")

        services.categories.reorder([c.id, a.id, b.id])

        assert [n.id for n in services.categories.get_tree()] == [c.id, a.id, b.id]

    def test_reorder_siblings_with_different_levels(self, services):
        """Test that get_tree follows a reorder even when sibling levels differ."""
        parent = services.categories.create("Parent")
        deep = services.categories.create("Deep", parent_id=parent.id, level=5)
        shallow = services.categories.create("Shallow", parent_id=parent.id)

        services.categories.reorder([shallow.id, deep.id])
        tree = services.categories.get_tree()
        assert [c.id for c in tree[0].children] == [shallow.id, deep.id]

        services.categories.reorder([deep.id, shallow.id])
        tree = services.categories.get_tree()
        assert [c.id for c in tree[0].children] == [deep.id, shallow.id]
        assert [c.id for c in services.categories.find_children(parent.id)] == [
            deep.id,
            shallow.id,
        ]

    def test_reorder_across_groups_raises(self, services):
        """Test that reordering categories from different parents is refused."""
        parent = services.categories.create("Parent")
        child = services.categories.create("Child", parent_id=parent.id)
        root = services.categories.create("Root")

        with pytest.raises(InvalidMoveError):
            services.categories.reorder([child.id, root.id])

        assert services.categories.find(child.id).order == 0
        assert services.categories.find(root.id).order == 1

    def test_reorder_unknown_id_changes_nothing(self, services):
        """Test reorder unknown id changes nothing."""
        a = services.categories.create("A")
        b = services.categories.create("B")

        with pytest.raises(CategoryNotFoundError):
            services.categories.reorder([b.id, "missing", a.id])

        assert [n.id for n in services.categories.get_tree()] == [a.id, b.id]

    def test_move_to_new_parent_appends(self, services):
        """Test move to new parent appends."""
        machining = services.categories.create("Machining")
        turning = services.categories.create("Turning", parent_id=machining.id)
        casting = services.categories.create("Casting")

        services.categories.move(casting.id, machining.id)

        moved = services.categories.find(casting.id)
        assert moved.parent_id == machining.id
        assert moved.level == 2
        tree = services.categories.get_tree()
        assert [c.id for c in tree[0].children] == [turning.id, casting.id]

    def test_move_with_explicit_order(self, services):
        """Test move with explicit order."""
        parent = services.categories.create("Parent")
        services.categories.create("Existing", parent_id=parent.id)
        other = services.categories.create("Other")

        services.categories.move(other.id, parent.id, new_order=0)

        assert services.categories.find(other.id).order == 0

    def test_move_to_root(self, services):
        """Test move to root."""
        parent = services.categories.create("Parent")
        child = services.categories.create("Child", parent_id=parent.id)

        services.categories.move(child.id, None)

        moved = services.categories.find(child.id)
        assert moved.parent_id is None
        assert moved.level == 1

    def test_move_updates_subtree_levels(self, services):
        """Test move updates subtree levels."""
        a = services.categories.create("A")
        b = services.categories.create("B", parent_id=a.id)
        c = services.categories.create("C", parent_id=b.id)
        root = services.categories.create("Root")

        services.categories.move(a.id, root.id)

        assert services.categories.find(a.id).level == 2
        assert services.categories.find(b.id).level == 3
        assert services.categories.find(c.id).level == 4

    def test_move_under_descendant_raises(self, services):
        """Test move under descendant raises."""
        a = services.categories.create("A")
        b = services.categories.create("B", parent_id=a.id)
        c = services.categories.create("C", parent_id=b.id)

        with pytest.raises(InvalidMoveError):
            services.categories.move(a.id, c.id)

        assert services.categories.find(a.id).parent_id is None

    def test_move_under_self_raises(self, services):
        """Test move under self raises."""
        a = services.categories.create("A")

        with pytest.raises(InvalidMoveError):
            services.categories.move(a.id, a.id)

    def test_move_to_missing_parent_raises(self, services):
        """Test move to missing parent raises."""
        a = services.categories.create("A")

        with pytest.raises(CategoryNotFoundError):
            services.categories.move(a.id, "missing")

    def test_move_missing_category_raises(self, services):
        """Test move missing category raises."""
        with pytest.raises(CategoryNotFoundError):
            services.categories.move("missing", None)

    def test_get_path(self, services):
        """Test get path."""
        a = services.categories.create("A")
        b = services.categories.create("B", parent_id=a.id)
        c = services.categories.create("C", parent_id=b.id)

        path = services.categories.get_path(c.id)

        assert [p.id for p in path] == [a.id, b.id, c.id]

    def test_get_path_missing_raises(self, services):
        """Test get path missing raises."""
        with pytest.raises(CategoryNotFoundError):
            services.categories.get_path("missing")
