from .promotion_engine import PromotionEngine

__all__ = ['PromotionEngine']
