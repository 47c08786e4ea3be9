class NotProducible(LookupError):
    pass


class AmbiguousRecipe(ValueError):
    pass


class UnsupportedRecipe(ValueError):
    pass


class RecipeResolver:

    def __init__(self, catalog):
        self.catalog = catalog

    def recipe_for(self, mat):
        found = self.catalog.recipes_by_output.get(mat, [])
        if len(found) == 0:
            raise NotProducible(f"No recipe produces {self.catalog.material_name(mat)}")
        elif len(found) == 1:
            return found[0]
        else:
            names = [recipe.name for recipe in found]
            raise AmbiguousRecipe(
                f"{len(found)} recipes produce "
                f"{self.catalog.material_name(mat)}: {names}"
            )

    def is_producible(self, mat):
        return mat in self.catalog.recipes_by_output

    def inputs_for(self, mat):
        return self.recipe_for(mat).inputs

    def single_input_for(self, mat):
        # Extractor -> P1 chains only carry one raw input per P1
        inputs = self.inputs_for(mat)
        if len(inputs) != 1:
            raise UnsupportedRecipe(
                f"Expected one input for {self.catalog.material_name(mat)}, "
                f"recipe has {len(inputs)}: {sorted(inputs)}"
            )
        return next(iter(inputs))
