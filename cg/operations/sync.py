"""Resynchronising the staging index with HEAD."""

from cg.core.index import Index


def sync_index_from_head(repo) -> Index:
    """
    Overwrite the staging index with the flat tree of HEAD.

    Anything staged but not in HEAD is dropped. Callers are expected to
    hold the index lock.

    Returns:
        The index as saved

    Raises:
        ObjectStoreError: If HEAD's tree cannot be listed
        IndexIOError: If the index cannot be written
    """
    head = repo.store.read_head_tree()
    index = Index()
    index.replace(head)
    repo.save_index(index)
    return index
