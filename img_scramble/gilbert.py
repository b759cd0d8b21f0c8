"""Module generating generalized Hilbert (Gilbert) curve

Curve visits every cell of rectangular grid of any size exactly once
and consecutive cells of the curve are always neighbours. The area to
fill is described by origin point and two vectors, a along the major
direction and b along the minor one. Area is recursively split in two
(when it is much longer than wide) or in three parts. Halves of odd
length are nudged by one step so sub areas stay well formed on sizes
that are not powers of two.
"""


def sign(x):
    return (x > 0) - (x < 0)


def gilbert2d(width, height):
    """Generate curve traversing width x height grid

    Parameters:
        width (int): Grid width, at least 1
        height (int): Grid height, at least 1

    Return:
        list: (x, y) tuples, width * height items
    """
    if width >= height:
        return generate2d(0, 0, width, 0, 0, height)

    return generate2d(0, 0, 0, height, width, 0)


def generate2d(x, y, ax, ay, bx, by):
    """Generate curve over area spanned by vectors a and b from (x, y)

    Parameters:
        x, y (int): Origin of the area
        ax, ay (int): Major direction vector
        bx, by (int): Minor direction vector

    Return:
        list: (x, y) tuples covering the area
    """
    w = abs(ax + ay)
    h = abs(bx + by)

    dax, day = sign(ax), sign(ay)
    dbx, dby = sign(bx), sign(by)

    if h == 1:
        return [(x + i * dax, y + i * day) for i in range(w)]

    if w == 1:
        return [(x + i * dbx, y + i * dby) for i in range(h)]

    ax2, ay2 = ax // 2, ay // 2
    bx2, by2 = bx // 2, by // 2

    w2 = abs(ax2 + ay2)
    h2 = abs(bx2 + by2)

    if 2 * w > 3 * h:
        if w2 % 2 and w > 2:
            ax2, ay2 = ax2 + dax, ay2 + day

        return (generate2d(x, y, ax2, ay2, bx, by)
                + generate2d(x + ax2, y + ay2, ax - ax2, ay - ay2, bx, by))

    if h2 % 2 and h > 2:
        bx2, by2 = bx2 + dbx, by2 + dby

    return (generate2d(x, y, bx2, by2, ax2, ay2)
            + generate2d(x + bx2, y + by2, ax, ay, bx - bx2, by - by2)
            + generate2d(x + (ax - dax) + (bx2 - dbx), y + (ay - day) + (by2 - dby),
                         -bx2, -by2, -(ax - ax2), -(ay - ay2)))
