from decksync.parsers.decklist import SplitDeckList, split_main_side

__all__ = ["SplitDeckList", "split_main_side"]
