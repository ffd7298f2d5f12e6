"""
棋盘视图

每堆石子画成一行，点击某颗石子表示取走它以及同一行右侧的全部石子。
几何计算（stone_rect / hit_test）不需要初始化显示，可以单独测试。
"""

from typing import Optional, Sequence, Tuple

import pygame

from ngp_nim.shared.constants import BLACK, PILE_COUNT, STONE_COLOR, STONE_HOVER_COLOR


class BoardView:
    """五堆石子的布局与绘制"""

    def __init__(self, x: int, y: int, width: int, height: int, stone_size: int = 36, gap: int = 10):
        self.rect = pygame.Rect(x, y, width, height)
        self.stone_size = stone_size
        self.gap = gap
        self.row_height = height // PILE_COUNT

    def stone_rect(self, pile: int, index: int) -> pygame.Rect:
        """第 pile 行第 index 颗石子的外接矩形"""
        left = self.rect.x + 60 + index * (self.stone_size + self.gap)
        top = self.rect.y + pile * self.row_height + (self.row_height - self.stone_size) // 2
        return pygame.Rect(left, top, self.stone_size, self.stone_size)

    def hit_test(self, pos: Tuple[int, int], piles: Sequence[int]) -> Optional[Tuple[int, int]]:
        """把一次点击换算成 (堆序号, 取走数量)；没有点中石子时返回 None"""
        for pile, size in enumerate(piles):
            for index in range(size):
                if self.stone_rect(pile, index).collidepoint(pos):
                    return pile, size - index
        return None

    def draw(
        self,
        surface: pygame.Surface,
        font: pygame.font.Font,
        piles: Sequence[int],
        hover: Optional[Tuple[int, int]] = None,
    ) -> None:
        for pile, size in enumerate(piles):
            label = font.render(str(pile), True, BLACK)
            row_top = self.rect.y + pile * self.row_height
            surface.blit(label, label.get_rect(midleft=(self.rect.x + 10, row_top + self.row_height // 2)))
            for index in range(size):
                # 悬停时高亮将被取走的石子
                selected = hover is not None and hover[0] == pile and index >= size - hover[1]
                color = STONE_HOVER_COLOR if selected else STONE_COLOR
                pygame.draw.ellipse(surface, color, self.stone_rect(pile, index))


__all__ = ["BoardView"]
