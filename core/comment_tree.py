"""
Turns the flat, chronologically ordered comment list of a blog into the
nested reply tree the detail page renders.
"""


def build_comment_tree(flat_comments):
    """
    Builds the reply tree from comments ordered by created_at ascending.

    Every comment comes back as a copy carrying a 'replies' list, so the
    fetched records are never mutated and the tree can be rebuilt from the
    same list any number of times.

    A comment whose parent_id is missing from the batch is kept as a root
    instead of being dropped.
    """
    # Pass 1: index every comment by id
    by_id = {}
    nodes = []
    for comment in flat_comments:
        node = dict(comment)
        node['replies'] = []
        by_id[node['id']] = node
        nodes.append(node)

    # Pass 2: attach in input order so siblings stay chronological
    roots = []
    for node in nodes:
        parent = by_id.get(node.get('parent_id')) if node.get('parent_id') else None
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent['replies'].append(node)

    # Pass 3: a loop of parent links (a -> b -> a) hangs off no root, so the
    # earliest comment of each loop is detached and promoted
    reached = set()
    _mark_reachable(roots, reached)
    for node in nodes:
        if id(node) in reached:
            continue
        parent = by_id[node['parent_id']]
        parent['replies'] = [reply for reply in parent['replies'] if reply is not node]
        roots.append(node)
        _mark_reachable([node], reached)
    return roots


def _mark_reachable(roots, reached):
    stack = list(roots)
    while stack:
        node = stack.pop()
        reached.add(id(node))
        stack.extend(node['replies'])


def flatten_comment_tree(roots):
    """Pre-order walk of a built tree, dropping the 'replies' lists."""
    flat = []
    stack = list(reversed(roots))
    while stack:
        node = stack.pop()
        flat.append({k: v for k, v in node.items() if k != 'replies'})
        stack.extend(reversed(node['replies']))
    return flat


def count_comments(roots):
    total = 0
    stack = list(roots)
    while stack:
        node = stack.pop()
        total += 1
        stack.extend(node['replies'])
    return total
